"""Auth endpoints."""

from clubdesk.api.client import ResourceApi
from clubdesk.schemas.auth import LoginResponse


class AuthApi(ResourceApi):
    async def login(self, email: str, password: str) -> LoginResponse:
        data = await self.client.post("/auth/login", {"email": email, "password": password})
        return self.parse(LoginResponse, data or {})

    async def reset_password(self, email: str, current_password: str, new_password: str):
        return await self.client.post("/auth/reset-password", {
            "email": email,
            "currentPassword": current_password,
            "newPassword": new_password,
        })
