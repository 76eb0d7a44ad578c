# Importing every model registers its table on db.metadata.
from soshi.models.user_model import User  # noqa: F401
from soshi.models.session_model import Session  # noqa: F401
from soshi.models.follow_model import Follow  # noqa: F401
from soshi.models.group_model import (  # noqa: F401
    EventResponse,
    Group,
    GroupEvent,
    GroupMember,
)
from soshi.models.post_model import Post, PostHistory  # noqa: F401
from soshi.models.comment_model import Comment  # noqa: F401
from soshi.models.reaction_model import Reaction  # noqa: F401
from soshi.models.notification_model import Notification  # noqa: F401
from soshi.models.activity_model import Activity, ActivitySettings  # noqa: F401
