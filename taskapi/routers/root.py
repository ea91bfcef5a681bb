from fastapi import APIRouter

from taskapi.config import APP_TITLE, APP_VERSION

router = APIRouter(tags=["root"])

ENDPOINTS = {
    "GET /tasks": "List tasks (query: page, per_page, status, search)",
    "GET /tasks/{id}": "Get a task by ID",
    "POST /tasks": "Create a new task",
    "PUT /tasks/{id}": "Update a task",
    "DELETE /tasks/{id}": "Delete a task",
}


@router.get("/")
def describe_service():
    return {
        "message": f"Welcome to {APP_TITLE}",
        "version": APP_VERSION,
        "endpoints": ENDPOINTS,
    }
