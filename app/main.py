import os

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI

from app.controllers import Attempts, Auth, Tests
from app.dependencies import cleanup_resources, get_attempt_service, get_auth_service
from app.helpers.Database import MongoDB
from app.middleware.Cors import add_cors_middleware
from app.middleware.GlobalErrorHandling import GlobalErrorHandlingMiddleware

load_dotenv()

app = FastAPI(
    title="Exam Portal Engine",
    description="Exam Portal Engine - Timed multiple choice tests",
    version="1.0.0",
    docs_url="/api-docs",
    redoc_url="/api-redoc",
)

# Middleware
app.add_middleware(GlobalErrorHandlingMiddleware)
add_cors_middleware(app)

app.include_router(Auth.router)
app.include_router(Tests.router)
app.include_router(Attempts.router)

scheduler = BackgroundScheduler(job_defaults={"coalesce": True, "max_instances": 1})


def run_auto_submit_job() -> None:
    result = get_attempt_service().auto_submit_expired()
    success = result.get("success")
    data = result.get("data") or {}
    if not success:
        print(f"[AutoSubmit] success={success} error={result.get('error')}")
    elif data.get("autoSubmitted"):
        print(f"[AutoSubmit] checked={data.get('checked')} autoSubmitted={data.get('autoSubmitted')}")


def seed_admin() -> None:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        print("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin seeding")
        return
    result = get_auth_service().ensure_admin(email, password, os.getenv("ADMIN_NAME", "Administrator"))
    print(f"[Admin] email={email} success={result.get('success')}")


@app.on_event("startup")
def startup_event():
    connection_string = os.getenv("MONGODB_CONNECTION_STRING")
    MongoDB.connect(connection_string)
    print("MongoDB connected")

    seed_admin()

    sweep_seconds = int(os.getenv("AUTO_SUBMIT_SWEEP_SECONDS", "30"))
    scheduler.add_job(
        run_auto_submit_job,
        trigger="interval",
        seconds=sweep_seconds,
        id="auto_submit_job",
        replace_existing=True,
    )
    scheduler.start()
    print(f"Auto submit job scheduled to run every {sweep_seconds} seconds")


@app.on_event("shutdown")
def shutdown_event():
    print("Shutting down Exam Portal Engine...")
    try:
        scheduler.shutdown(wait=False)
    except Exception as e:
        print(f"Scheduler shutdown failed: {e}")
    cleanup_resources()


@app.get("/")
def root():
    return {
        "service": "Exam Portal Engine",
        "status": "running",
        "description": "Timed multiple choice tests",
    }


@app.get("/health")
def health_check():
    """Health check endpoint to verify the server is running"""
    db_status = MongoDB.connection_status()
    return {
        "status": "healthy",
        "database": db_status,
        "service": "Exam Portal Engine",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=3003, reload=True)
