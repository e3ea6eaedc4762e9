# electra/main.py

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from dotenv import load_dotenv
from contextlib import asynccontextmanager

# --- загрузка переменных окружения до чтения настроек ---
load_dotenv()

from electra.config import settings
from electra.utils.log import Log
from electra.utils.database import check_connection, init_db
from electra.utils.dates import utcnow
from electra.utils.errors import (
    DuplicateKeyError,
    duplicate_key_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from electra.utils.images import configure_cloudinary
from electra.middleware.db_middleware import DBSessionMiddleware

# --- sync логгер для раннего старта ---
boot_log = Log()

# ────────────── Lifespan ──────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    boot_log.log_info_sync(target="startup", message="lifespan: startup начат")

    # Инициализация БД и служебных учётных записей
    created = await init_db()
    boot_log.log_info_sync(target="startup", message="База инициализирована", data={"seeded": created})

    configure_cloudinary()
    boot_log.log_info_sync(target="startup", message="Cloudinary настроен")

    app.state.log = Log()
    await app.state.log.log_info(target="startup", message="Async Log инициализирован")

    yield

    # shutdown
    await app.state.log.log_info(target="shutdown", message="Остановка приложения")
    await app.state.log.shutdown()
    boot_log.log_info_sync(target="shutdown", message="Log корректно завершён")

# ────────────── Создаём FastAPI приложение ──────────────
app = FastAPI(title="Sarathi Electricals API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# DB middleware для request.state.db
app.add_middleware(DBSessionMiddleware)

# ────────────── Обработка ошибок ──────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(DuplicateKeyError, duplicate_key_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

@app.get("/")
def read_root():
    return {"message": "Welcome to Sarathi"}

@app.get("/api/health", summary="Состояние сервиса и базы данных")
async def health(request: Request):
    connected = await check_connection(request.state.db)
    return {
        "status": "ok",
        "database": "connected" if connected else "disconnected",
        "timestamp": utcnow().isoformat() + "Z",
    }

# ────────────── Подключение роутов ──────────────
from electra.routes import order, product, staff

app.include_router(product.router, prefix="/api/products", tags=["products"])
app.include_router(order.router, prefix="/api/orders", tags=["orders"])
app.include_router(staff.router, prefix="/api/staff", tags=["staff"])

# ────────────── Запуск uvicorn ──────────────
if __name__ == "__main__":
    boot_log.log_info_sync(target="startup", message="Запуск uvicorn.run")
    uvicorn.run(
        "electra.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="info",
    )
