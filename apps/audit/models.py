from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    """Audit trail entry: who did what to which entity."""

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    action = models.CharField(max_length=50)
    entity_type = models.CharField(max_length=50)  # 'RESERVATION', 'TABLE', ...
    entity_id = models.CharField(max_length=64, blank=True)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='audit_entity_idx'),
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.actor_id} - {self.action} - {self.entity_type}:{self.entity_id}"
