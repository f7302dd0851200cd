"""Route guard untuk zona /auth, /app, dan /admin.

Token sesi adalah JWT dari backend. Payload dibaca TANPA verifikasi tanda
tangan (python-jose `get_unverified_claims`), jadi klaim `role` di token hanya
dipakai sebagai petunjuk routing. Keputusan akses ke /admin memakai role dari
profil yang dikembalikan server bila fungsi `verify` diberikan.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from jose import jwt
from jose.exceptions import JOSEError

from .models import ApiError, Role

LOGIN_ROUTE = "/auth/login"
LOGOUT_ROUTE = "/auth/logout"
USER_HOME = "/app/dashboard"
ADMIN_HOME = "/admin"
AUTH_PAGES = ("/auth/login", "/auth/signup", "/auth/verify")
ADMIN_ROLES = (Role.SUPER_ADMIN, Role.EXPERT)

# verify(token) -> role dari server, atau raise bila sesi tidak valid
Verifier = Callable[[str], Optional[Role]]


@dataclass(frozen=True)
class RouteDecision:
    redirect: Optional[str] = None
    clear_token: bool = False

    @property
    def allowed(self) -> bool:
        return self.redirect is None


ALLOW = RouteDecision()


def decode_claims(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode segmen tengah token sebagai klaim JSON, tanpa cek tanda tangan.

    Returns:
        Dict klaim, atau None jika token kosong / bukan JWT tiga segmen / rusak.
    """
    if not token or token.count(".") != 2:
        return None
    try:
        claims = jwt.get_unverified_claims(token)
    except (JOSEError, ValueError, TypeError):
        return None
    return claims if isinstance(claims, dict) else None


def role_of(claims: Optional[Dict[str, Any]]) -> Optional[Role]:
    if not claims:
        return None
    return Role.parse(claims.get("role"))


def home_for(role: Optional[Role]) -> str:
    """Halaman awal sesuai role; role tidak dikenal masuk area user."""
    return ADMIN_HOME if role in ADMIN_ROLES else USER_HOME


def _zone_matches(path: str, zone: str) -> bool:
    return path == zone or path.startswith(zone + "/")


def resolve_route(path: str, token: Optional[str], verify: Optional[Verifier] = None) -> RouteDecision:
    """Tentukan redirect untuk `path` berdasarkan token sesi.

    Args:
        path: Route logis, mis. '/admin/engine/rules'.
        token: Token sesi (boleh None).
        verify: Callable opsional yang memvalidasi token ke server dan
            mengembalikan role dari profil. ApiError dianggap sesi
            tidak valid.

    Returns:
        RouteDecision; `allowed` True jika halaman boleh ditampilkan.
    """
    if path == LOGOUT_ROUTE:
        return RouteDecision(redirect=LOGIN_ROUTE, clear_token=True)

    if path in AUTH_PAGES:
        if token:
            claims = decode_claims(token)
            if claims is not None:
                return RouteDecision(redirect=home_for(role_of(claims)))
        return ALLOW

    if _zone_matches(path, ADMIN_HOME):
        if not token:
            return RouteDecision(redirect=LOGIN_ROUTE)
        claims = decode_claims(token)
        if claims is None:
            return RouteDecision(redirect=LOGIN_ROUTE)
        role = role_of(claims)
        if verify is not None:
            try:
                role = verify(token)
            except ApiError:
                return RouteDecision(redirect=LOGIN_ROUTE, clear_token=True)
        if role not in ADMIN_ROLES:
            return RouteDecision(redirect=USER_HOME)
        return ALLOW

    if _zone_matches(path, "/app"):
        if not token:
            return RouteDecision(redirect=LOGIN_ROUTE)
        if verify is not None:
            try:
                verify(token)
            except ApiError:
                return RouteDecision(redirect=LOGIN_ROUTE, clear_token=True)
        return ALLOW

    return ALLOW


UNVERIFIED_MESSAGE = "Email belum diverifikasi"


def needs_verification(error: ApiError) -> bool:
    """Login ditolak karena email belum diverifikasi -> arahkan ke /auth/verify."""
    return (error.message or "").strip().lower() == UNVERIFIED_MESSAGE.lower()
