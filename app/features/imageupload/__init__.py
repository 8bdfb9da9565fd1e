from fastapi import APIRouter

# Create router at module level; routes register themselves on import
router = APIRouter(tags=["image-upload"])

from .routes_imageupload import *  # This will register the routes with our router
