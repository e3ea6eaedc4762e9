# electra/middleware/db_middleware.py

from starlette.types import ASGIApp, Receive, Scope, Send

from electra.utils.database import AsyncSessionLocal


class DBSessionMiddleware:
    """
    Сессия базы на время HTTP-запроса: request.state.db.
    Незавершённая транзакция откатывается, если обработчик упал.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async with AsyncSessionLocal() as session:
            scope.setdefault("state", {})["db"] = session
            try:
                await self.app(scope, receive, send)
            except Exception:
                await session.rollback()
                raise
