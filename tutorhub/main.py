import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from tutorhub.core import config
from tutorhub.database import engine, init_db
from tutorhub.routes import teacher_routes, user_routes

app = FastAPI(title='TutorHub API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        init_db(engine)
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'TutorHub API Running'}


app.include_router(user_routes.router, prefix='/api/users')
app.include_router(teacher_routes.router, prefix='/api/teachers')
