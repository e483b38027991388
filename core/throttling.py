from rest_framework.throttling import ScopedRateThrottle

_PERIODS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class AuthRateThrottle(ScopedRateThrottle):
    """
    Scoped throttle that understands multi-unit periods such as ``10/5m``.

    DRF only reads the first character of the period, which rules out
    values like ``5m``.
    """

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        multiplier = period[:-1]
        unit = period[-1]
        seconds = _PERIODS[unit] * (int(multiplier) if multiplier else 1)
        return int(num), seconds
