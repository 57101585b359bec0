from fastapi import APIRouter

from app.api.routes import image_router

api_router = APIRouter()

# 每个元素都是一个包含 router 与 tags (可选 prefix) 的字典
routers_to_include = [
    {"router": image_router.router, "tags": ["images"]},
]

for route_config in routers_to_include:
    api_router.include_router(**route_config)
