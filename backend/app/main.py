from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.modules.auth.router import router as auth_router
from app.modules.book_chapter.resource import router as book_chapter_router
from app.modules.copyright.resource import router as copyright_router
from app.modules.journal.resource import router as journal_router
from app.modules.user.router import admin_router as special_users_router
from app.modules.user.router import router as user_router

# Настраиваем логирование при старте приложения
setup_logging()


app = FastAPI(
    title="Research Registry API",
    description="Journals, book chapters and copyrights of the university",
    version="1.0.0",
)

# Добавляем CORS middleware ДО подключения роутеров
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ALLOW_ORIGINS,  # Список конкретных origins (не ["*"])
    allow_credentials=True,
    allow_methods=["*"],  # Разрешаем все HTTP методы
    allow_headers=["*"],  # Разрешаем все заголовки
)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(user_router)
app.include_router(special_users_router)
app.include_router(journal_router)
app.include_router(book_chapter_router)
app.include_router(copyright_router)


@app.get("/api", response_class=PlainTextResponse)
def research_registry() -> str:
    return "Research Registry"
