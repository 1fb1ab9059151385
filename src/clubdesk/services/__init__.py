"""Operator workflows — guarded mutations with toasts and cache invalidation."""

from clubdesk.services.feedback import Toast, Toaster
from clubdesk.services.guards import ValidationError
from clubdesk.services.leaves import LeaveService
from clubdesk.services.mutation import Mutation, MutationResult
from clubdesk.services.notifications import NotificationService, PushNotificationForm
from clubdesk.services.players import PlayerForm, PlayerService
from clubdesk.services.requests import RequestService
from clubdesk.services.tables import TableService
from clubdesk.services.tournaments import TournamentService
from clubdesk.services.uploads import DocumentUpload, UploadError

__all__ = [
    "DocumentUpload",
    "LeaveService",
    "Mutation",
    "MutationResult",
    "NotificationService",
    "PlayerForm",
    "PlayerService",
    "PushNotificationForm",
    "RequestService",
    "TableService",
    "Toast",
    "Toaster",
    "TournamentService",
    "UploadError",
    "ValidationError",
]
