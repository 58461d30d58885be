"""
FireGuard Schemas Package

USAGE:
    from fireguard.schemas.common import BoundingBox, CANADA_BBOX
    from fireguard.schemas.risk import LocationRiskResponse
"""
