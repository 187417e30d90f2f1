"""
Domain errors raised by the map services.
Routes translate them into HTTP responses using ``status_code``.
"""


class MapaError(Exception):
    """Base class for every error the map service raises on purpose."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AddressNotFoundError(MapaError):
    """The geocoder returned no coordinates for a searched address."""
    status_code = 404

    def __init__(self, address: str):
        super().__init__("address not found")
        self.address = address


class SessionNotFoundError(MapaError):
    status_code = 404

    def __init__(self, session_id: str):
        super().__init__(f"Session '{session_id}' not found")
        self.session_id = session_id


class UnknownZoneError(MapaError):
    status_code = 422

    def __init__(self, zone: str):
        super().__init__(f"Unknown zone '{zone}'")
        self.zone = zone


class UnknownEventCategoryError(MapaError):
    status_code = 422

    def __init__(self, category: str):
        super().__init__(f"Unknown event category '{category}'")
        self.category = category


class InvalidRadiusError(MapaError):
    """A zone radius would drop to zero or below."""
    status_code = 400


class UpstreamServiceError(MapaError):
    """An external lookup service failed (network error, bad status, bad JSON)."""
    status_code = 502

    def __init__(self, service: str, detail: str):
        super().__init__(f"{service} request failed: {detail}")
        self.service = service
        self.detail = detail
