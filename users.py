# users.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, Response

from database import UserDb
from errors import NotFound, UserServiceError
from models import PartialUser, User

logger = logging.getLogger("UsersApi")

router = APIRouter()


def get_user_db(request: Request) -> UserDb:
    return request.app.state.user_db


@router.get("/users", response_model=List[User])
async def list_users(
    response: Response,
    page_size: Optional[int] = Query(None, ge=1, le=1000),
    continuation: Optional[str] = None,
    user_db: UserDb = Depends(get_user_db)
):
    """
    List users. Without page_size this returns every document in the collection;
    with it, one page is returned and the next token is sent in x-ms-continuation.
    A continuation token is only meaningful together with page_size.
    """
    if continuation is not None and page_size is None:
        raise HTTPException(status_code=422, detail="continuation requires page_size")

    try:
        if page_size is None:
            return await user_db.list()
        users, token = await user_db.list_page(page_size, continuation)
    except UserServiceError as e:
        raise HTTPException(status_code=404, detail=f"Failed to retrieve user list: {str(e)}")

    if token:
        response.headers["x-ms-continuation"] = token
    return users


@router.get("/users/{user_id}", response_model=User)
async def find_user_by_id(user_id: str, user_db: UserDb = Depends(get_user_db)):
    try:
        return await user_db.find(user_id)
    except UserServiceError as e:
        raise HTTPException(status_code=404, detail=f"Failed to retrieve user: {str(e)}")


@router.post("/users", response_model=User)
async def create(
    email: str = Form(...),
    name: str = Form(...),
    user_db: UserDb = Depends(get_user_db)
):
    """
    Create a user from x-www-form-urlencoded data. The id and partition_key are
    assigned here, never taken from the client.
    """
    user = User.from_partial(PartialUser(email=email, name=name))
    try:
        return await user_db.create(user)
    except UserServiceError as e:
        raise HTTPException(status_code=400, detail=f"Failed to add user to database: {str(e)}")


@router.delete("/users/{user_id}")
async def delete(user_id: str, user_db: UserDb = Depends(get_user_db)):
    try:
        await user_db.delete(user_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=f"Failed to delete user: {str(e)}")
    except UserServiceError as e:
        raise HTTPException(status_code=400, detail=f"Failed to delete user: {str(e)}")
    return {"message": f"deleted user with id: {user_id}", "id": user_id}


@router.post("/setup")
async def setup(user_db: UserDb = Depends(get_user_db)):
    """Drop and recreate the database and collection so the sample can run"""
    try:
        await user_db.setup()
    except UserServiceError as e:
        raise HTTPException(status_code=400, detail=f"Failed to create database: {str(e)}")
    logger.info(f"Set up {user_db.database_name}/{user_db.collection_name}")
    return {
        "message": "created",
        "database": user_db.database_name,
        "collection": user_db.collection_name
    }
