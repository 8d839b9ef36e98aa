def base_temperature(lat: float) -> float:
    """
    Baseline temperature (°C) for a latitude band.

    Thresholds are compared against the signed latitude, so southern latitudes
    all fall through to the warmest band.
    """
    if lat > 45:
        return 8.0
    if lat > 35:
        return 15.0
    if lat > 25:
        return 22.0
    return 28.0
