"""
HTTP helpers the Streamlit page uses to talk to the Mapa de Zonas API.
Failures never raise: they come back as {"error": ..., "status": ...}.
"""

import os

import requests

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")

SESSION_MISSING_PREFIX = "Session '"


def call_backend(method: str, path: str, payload: dict = None) -> dict:
    try:
        response = requests.request(
            method,
            f"{BACKEND_URL}{path}",
            json=payload,
            timeout=60  # Overpass queries over a whole zone can be slow
        )
        if response.status_code >= 400:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            return {"error": detail, "status": response.status_code}
        if response.status_code == 204:
            return {}
        return response.json()
    except requests.exceptions.ConnectionError:
        return {"error": "Cannot connect to backend. Make sure the backend is running on port 8000."}
    except requests.exceptions.Timeout:
        return {"error": "Request timed out. The map services may be slow, please try again."}
    except requests.exceptions.RequestException as e:
        return {"error": f"An error occurred: {str(e)}"}


def check_backend_health() -> bool:
    try:
        response = requests.get(f"{BACKEND_URL}/health", timeout=2)
        return response.status_code == 200
    except requests.exceptions.RequestException:
        return False


def fetch_map_html(session_id: str) -> str | None:
    try:
        response = requests.get(f"{BACKEND_URL}/sessions/{session_id}/map", timeout=30)
        response.raise_for_status()
        return response.text
    except requests.exceptions.RequestException:
        return None


def is_session_missing(result: dict) -> bool:
    """True when the backend no longer knows the session (restart or deletion)."""
    return result.get("status") == 404 and str(result.get("error", "")).startswith(SESSION_MISSING_PREFIX)


def notice_for(result: dict, failure_message: str = None) -> str:
    """
    Text to show for a failed call.
    ``failure_message`` replaces a 404 from the action itself, never a lost session.
    """
    if failure_message and result.get("status") == 404 and not is_session_missing(result):
        return failure_message
    return str(result["error"])
