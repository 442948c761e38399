"""
HTTP client for the Homonym Collector API.
"""

import httpx

from homonyms.core.config import Settings

BASE_URL = Settings.from_env().api_url


class ApiError(Exception):
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


def _json(r: httpx.Response):
    if r.is_error:
        try:
            detail = r.json().get("detail", r.reason_phrase)
        except ValueError:
            detail = r.reason_phrase
        raise ApiError(r.status_code, str(detail))
    return r.json()


def health() -> bool:
    try:
        r = httpx.get(f"{BASE_URL}/health", timeout=5)
    except httpx.HTTPError:
        return False
    return r.status_code == 200


# === Collections ===

def list_collections() -> list[dict]:
    return _json(httpx.get(f"{BASE_URL}/collections"))["collections"]


def create_collection(name: str) -> dict:
    return _json(httpx.post(f"{BASE_URL}/collections", json={"name": name}))


def get_collection(collection_id: str) -> dict:
    return _json(httpx.get(f"{BASE_URL}/collections/{collection_id}"))


def rename_collection(collection_id: str, name: str) -> dict:
    return _json(httpx.put(f"{BASE_URL}/collections/{collection_id}", json={"name": name}))


def delete_collection(collection_id: str) -> dict:
    return _json(httpx.delete(f"{BASE_URL}/collections/{collection_id}"))


# === Homonym groups ===

def list_homonyms(collection_id: str) -> list[dict]:
    return _json(httpx.get(f"{BASE_URL}/collections/{collection_id}/homonyms"))["homonyms"]


def search_homonyms(collection_id: str, term: str) -> list[dict]:
    r = httpx.get(f"{BASE_URL}/collections/{collection_id}/homonyms/search", params={"q": term})
    return _json(r)["homonyms"]


def create_homonym_group(collection_id: str, pronunciation: str, words: list[dict]) -> dict:
    payload = {"pronunciation": pronunciation, "words": words}
    return _json(httpx.post(f"{BASE_URL}/collections/{collection_id}/homonyms", json=payload))


def get_homonym_group(group_id: str) -> dict:
    return _json(httpx.get(f"{BASE_URL}/homonyms/{group_id}"))


def update_homonym_group(group_id: str, pronunciation: str, words: list[dict]) -> dict:
    payload = {"pronunciation": pronunciation, "words": words}
    return _json(httpx.put(f"{BASE_URL}/homonyms/{group_id}", json=payload))


def delete_homonym_group(group_id: str) -> dict:
    return _json(httpx.delete(f"{BASE_URL}/homonyms/{group_id}"))


# === Words ===

def get_definition(word: str) -> str:
    return _json(httpx.get(f"{BASE_URL}/words/{word}/definition", timeout=30))["definition"]


def get_pronunciation(word: str) -> str:
    return _json(httpx.get(f"{BASE_URL}/words/{word}/pronunciation", timeout=30))["pronunciation"]


def get_suggestions(word: str, sort: bool = False) -> dict:
    r = httpx.get(f"{BASE_URL}/words/{word}/suggestions", params={"sort": sort}, timeout=60)
    return _json(r)
