from .comment import router as comment_router
from .department import router as department_router
from .department_enhancements import router as department_enhancements_router
from .moderation import router as moderation_router
from .notification import router as notification_router
from .post import router as post_router
from .reaction import router as reaction_router

routes = [
    post_router,
    comment_router,
    reaction_router,
    # Must come before department_router so "enhancements" is never taken
    # for a department id
    department_enhancements_router,
    department_router,
    notification_router,
    moderation_router,
]
