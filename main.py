from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.logging import configure_logging
from app.endpoints import auth, user, course, enrollment
from app.middleware.exceptions import (
    global_exception_handler, validation_exception_handler, http_exception_handler,
    stale_data_exception_handler, integrity_exception_handler,
)
from app.middleware.logging import RequestLoggingMiddleware

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StaleDataError, stale_data_exception_handler)
app.add_exception_handler(IntegrityError, integrity_exception_handler)

app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"])
app.include_router(user.router, prefix=f"{settings.API_PREFIX}/users", tags=["Users"])
app.include_router(course.router, prefix=f"{settings.API_PREFIX}/courses", tags=["Courses"])
app.include_router(enrollment.router, prefix=f"{settings.API_PREFIX}/enrollments", tags=["Enrollments"])

@app.get("/health", tags=["Health"])
def health_check():
    return {"success": True, "message": "OK", "data": {"version": settings.VERSION}}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
