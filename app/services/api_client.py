# services/api_client.py

"""
Client HTTP untuk backend Si Pak-E.

Semua request memakai base URL dari konfigurasi dan header
`Authorization: Bearer <token>` bila token tersedia. Respons backend
dibungkus `{statusCode, message, data}`; client mengembalikan isi `data`
dan mengubah kegagalan menjadi `ApiError`.

Tidak ada retry, backoff, maupun cache: setiap panggilan adalah satu
round-trip request/response.
"""

import asyncio
import copy
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from core.models import ApiError, ConsultResult, ConsultationHistory, Page, Role, User
from core.search_filter import extract_items, extract_total_pages

DEFAULT_TIMEOUT = 15.0


class ApiClient:
    """Wrapper tipis di atas httpx untuk endpoint REST backend."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize ApiClient.

        Args:
            base_url: URL backend, mis. http://127.0.0.1:5000
            token: Token sesi (JWT) untuk header Authorization
            timeout: Timeout per request (detik)
            transport: Transport httpx alternatif (dipakai di test)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def with_token(self, token: Optional[str]) -> "ApiClient":
        """Salinan client dengan token lain; koneksi httpx dipakai bersama."""
        clone = copy.copy(self)
        clone.token = token
        return clone

    # ------------------------------------------------------------------
    # Low level
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        """Ambil `data` dari envelope atau lempar ApiError untuk status non-2xx."""
        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None

        if response.is_error:
            message = None
            if isinstance(body, dict):
                message = body.get("message")
                if isinstance(message, list):
                    message = "; ".join(str(m) for m in message)
            raise ApiError(message or response.reason_phrase or "Request gagal",
                           status_code=response.status_code, payload=body)

        if body is None and response.content:
            raise ApiError("Respons backend bukan JSON", status_code=response.status_code)

        # `{data, meta}` dibiarkan utuh supaya info paginasi tidak hilang
        if (isinstance(body, dict) and "data" in body and "meta" not in body
                and ("statusCode" in body or "message" in body)):
            return body["data"]
        return body

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Kirim satu request dan kembalikan isi `data` dari envelope."""
        try:
            response = self._client.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise ApiError(f"Tidak dapat terhubung ke backend: {e}") from e
        return self._unwrap(response)

    def get(self, path: str, **params) -> Any:
        return self.request("GET", path, params=params or None)

    # ------------------------------------------------------------------
    # Parallel fetch
    # ------------------------------------------------------------------
    async def _fetch_many(self, requests: List[Tuple[str, Optional[Dict[str, Any]]]]) -> List[Any]:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._async_transport(),
        ) as client:
            async def fetch(path: str, params: Optional[Dict[str, Any]]) -> Any:
                try:
                    response = await client.get(path, params=params, headers=self._headers())
                except httpx.HTTPError as e:
                    raise ApiError(f"Tidak dapat terhubung ke backend: {e}") from e
                return self._unwrap(response)

            return await asyncio.gather(*(fetch(path, params) for path, params in requests))

    def _async_transport(self) -> Optional[httpx.AsyncBaseTransport]:
        # MockTransport melayani sync dan async sekaligus
        if isinstance(self._transport, httpx.AsyncBaseTransport):
            return self._transport
        return None

    def fetch_many(self, requests: List[Tuple[str, Optional[Dict[str, Any]]]]) -> List[Any]:
        """GET beberapa endpoint secara bersamaan; hasil sesuai urutan input.

        Kegagalan salah satu request menggagalkan seluruhnya (ApiError).
        """
        return asyncio.run(self._fetch_many(requests))

    # ------------------------------------------------------------------
    # Resource CRUD
    # ------------------------------------------------------------------
    def list_page(
        self,
        path: str,
        parse: Callable[[Dict[str, Any]], Any],
        search: str = "",
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        """Ambil satu halaman list (search + page) dan parse tiap item."""
        data = self.request("GET", path, params={"search": search, "page": page, "limit": limit})
        items = [parse(item) for item in extract_items(data)]
        return Page(items=items, page=page, total_pages=extract_total_pages(data))

    def list_all(self, path: str, parse: Callable[[Dict[str, Any]], Any], limit: Optional[int] = None) -> List[Any]:
        params = {"limit": limit} if limit else None
        data = self.request("GET", path, params=params)
        return [parse(item) for item in extract_items(data)]

    def create(self, path: str, payload: Dict[str, Any]) -> Any:
        return self.request("POST", path, json=payload)

    def update(self, path: str, key: Any, payload: Dict[str, Any]) -> Any:
        return self.request("PUT", f"{path}/{key}", json=payload)

    def delete(self, path: str, key: Any) -> Any:
        return self.request("DELETE", f"{path}/{key}")

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    def login(self, username: str, password: str) -> Tuple[str, Optional[User]]:
        """Login; kembalikan (token, user)."""
        data = self.request("POST", "/users/login", json={"username": username, "password": password})
        token = (data or {}).get("token")
        if not token:
            raise ApiError("Token tidak ditemukan pada respons login", payload=data)
        user_data = (data or {}).get("user")
        return token, User.from_api(user_data) if user_data else None

    def register(self, form: Dict[str, Any], picture: Optional[Tuple[str, bytes, str]] = None) -> Any:
        """Registrasi user baru (multipart/form-data)."""
        files = {"profilePicture": picture} if picture else None
        return self.request("POST", "/users/register", data=form, files=files)

    def verify(self, username: str, code: str) -> Any:
        return self.request("POST", "/users/verify", json={"username": username, "code": code})

    def profile(self) -> User:
        data = self.request("GET", "/users/profile")
        return User.from_api(data or {})

    def verified_role(self, token: str) -> Optional[Role]:
        """Role menurut server untuk token tertentu; ApiError jika sesi tidak valid."""
        return self.with_token(token).profile().role

    # ------------------------------------------------------------------
    # Consultation
    # ------------------------------------------------------------------
    def consultation_start(self, api_base: str) -> ConsultResult:
        return ConsultResult.from_api(self.request("POST", f"{api_base}/start"))

    def consultation_process(self, api_base: str, symptom_id: str, yes: bool) -> ConsultResult:
        data = self.request("POST", f"{api_base}/process", json={"symptom_id": symptom_id, "yes": yes})
        return ConsultResult.from_api(data)

    def consultation_histories(self, api_base: str) -> List[ConsultationHistory]:
        data = self.request("GET", f"{api_base}/histories")
        return [ConsultationHistory.from_api(item) for item in extract_items(data)]

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------
    def admin_stats(self) -> Dict[str, Any]:
        return self.request("GET", "/admin/stats/dashboard") or {}
