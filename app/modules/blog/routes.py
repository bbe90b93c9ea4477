from fastapi import APIRouter, Depends, Request

from app.config.permissions_config import Permission
from app.core.dependencies import require_permission
from app.core.schemas import CreatedResponse, MessageResponse
from app.database.document_store import DocumentStore
from app.database.store_client import get_store
from app.modules.auth.schemas import CurrentUser
from app.modules.blog.schemas import BlogCreate, BlogListResponse, BlogResponse, BlogUpdate
from app.modules.blog.service import BlogService

router = APIRouter(prefix="/blog", tags=["blog"])


def get_blog_service(store: DocumentStore = Depends(get_store)) -> BlogService:
    return BlogService(store)


@router.get("", response_model=BlogListResponse)
async def list_published_posts(
    request: Request,
    service: BlogService = Depends(get_blog_service)
):
    """
    Published posts, newest first.

    Filters: category, author, tags (comma separated). Free-text search over
    title, content, author and category. Follow pagination.nextPageToken with
    ?pageToken=... to get the next page.
    """
    return await service.list_published(request.query_params)


@router.get("/admin", response_model=BlogListResponse)
async def list_all_posts(
    request: Request,
    current_user: CurrentUser = Depends(require_permission(Permission.BLOG_READ)),
    service: BlogService = Depends(get_blog_service)
):
    """All posts including drafts (extra filter: isPublished)"""
    return await service.list_all(request.query_params)


@router.get("/admin/{post_id}", response_model=BlogResponse)
async def get_any_post(
    post_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.BLOG_READ)),
    service: BlogService = Depends(get_blog_service)
):
    return await service.get_post(post_id, include_drafts=True)


@router.get("/{post_id}", response_model=BlogResponse)
async def get_published_post(
    post_id: str,
    service: BlogService = Depends(get_blog_service)
):
    return await service.get_post(post_id)


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_post(
    post_data: BlogCreate,
    current_user: CurrentUser = Depends(require_permission(Permission.BLOG_CREATE)),
    service: BlogService = Depends(get_blog_service)
):
    post_id = await service.create_post(post_data, current_user.uid)
    return {"id": post_id, "message": "Blog post created successfully"}


@router.put("/{post_id}", response_model=MessageResponse)
async def update_post(
    post_id: str,
    post_data: BlogUpdate,
    current_user: CurrentUser = Depends(require_permission(Permission.BLOG_UPDATE)),
    service: BlogService = Depends(get_blog_service)
):
    await service.update_post(post_id, post_data, current_user.uid)
    return {"message": "Blog post updated successfully"}


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: CurrentUser = Depends(require_permission(Permission.BLOG_DELETE)),
    service: BlogService = Depends(get_blog_service)
):
    await service.delete_post(post_id)
    return {"message": "Blog post deleted successfully"}
