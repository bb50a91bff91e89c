import errno

import httpx
import pytest

from taskmanager.config import settings


async def _get_raising(exc: Exception) -> httpx.Response:
    from main import create_app

    app = create_app()

    @app.get("/raise")
    async def raise_error():
        raise exc

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get("/raise")


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [errno.ECONNREFUSED, errno.ETIMEDOUT])
async def test_connection_oserror_answers_503(code):
    response = await _get_raising(OSError(code, "database unreachable"))

    assert response.status_code == 503
    assert response.json() == {"detail": settings.db_unavailable_hint}


@pytest.mark.asyncio
async def test_other_oserror_answers_500():
    response = await _get_raising(OSError(errno.ENOENT, "No such file"))

    assert response.status_code == 500
    assert response.json()["detail"].startswith("An unexpected OS error occurred")
