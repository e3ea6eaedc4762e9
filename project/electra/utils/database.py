# electra/utils/database.py

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.future import select
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from electra.config import settings
from electra.utils.security import hash_password

# ────────────── Base для моделей ──────────────
Base = declarative_base()  # базовый класс для всех моделей SQLAlchemy

# ────────────── URL базы данных ──────────────
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# ────────────── Асинхронный движок ──────────────
engine = create_async_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=settings.LOG_PRINT_DB.lower() in ("1", "true", "yes")
)

# ────────────── Асинхронная сессия ──────────────
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False  # объекты читаются после commit без повторного запроса
)

# ────────────── Учётные записи по умолчанию ──────────────
# Ключ идемпотентности - номер телефона
SEED_ACCOUNTS = (
    {
        "name": "Admin User",
        "phone": "9876543210",
        "role": "admin",
        "email": "admin@electrical.com",
        "password_key": "SEED_ADMIN_PASSWORD",
    },
    {
        "name": "Staff User",
        "phone": "7875353444",
        "role": "staff",
        "email_key": "SPECIAL_STAFF_EMAIL",  # читается из настроек при посеве
        "password_key": "SEED_STAFF_PASSWORD",
    },
    {
        "name": "Staff User",
        "phone": "9876543211",
        "role": "staff",
        "email": "staff@electrical.com",
        "password_key": "SEED_STAFF_PASSWORD",
    },
)


async def seed_accounts(session: AsyncSession) -> list[str]:
    """
    Создаёт служебные учётные записи, если их ещё нет.
    Проверка и создание не атомарны: рассчитано на запуск одного экземпляра.
    Возвращает список телефонов созданных записей.
    """
    from electra.models.staff import Staff

    created = []
    for account in SEED_ACCOUNTS:
        email = getattr(settings, account["email_key"]) if "email_key" in account else account["email"]
        result = await session.execute(select(Staff).where(Staff.phone == account["phone"]))
        if result.scalar_one_or_none() is not None:
            continue

        session.add(Staff(
            name=account["name"],
            phone=account["phone"],
            role=account["role"],
            email=email.lower(),
            password=hash_password(getattr(settings, account["password_key"])),
            attendance=[],
        ))
        created.append(account["phone"])

    await session.commit()
    return created


# ────────────── Инициализация базы данных ──────────────
async def init_db() -> list[str]:
    """
    Создаёт все таблицы в базе данных (если ещё не созданы)
    и служебные учётные записи: администратор, сотрудник, особый сотрудник.
    """
    # модели должны быть импортированы до create_all
    from electra.models import counter, order, product, staff  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        return await seed_accounts(session)


async def check_connection(session: AsyncSession) -> bool:
    """Проверяет, отвечает ли база данных."""
    try:
        await session.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
