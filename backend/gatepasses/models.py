from django.db import models
from django.db.models import Q


class GatePass(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    student = models.ForeignKey(
        'accounts.Profile',
        on_delete=models.PROTECT,
        related_name='gate_passes'
    )
    reason = models.TextField()
    date = models.DateField()
    # Mutated only through gatepasses.services.approval_engine.
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)
    qr_url = models.CharField(max_length=500, null=True, blank=True)
    hod = models.ForeignKey(
        'accounts.Profile',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='decided_passes'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ('-created_at',)
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status='approved', qr_url__isnull=False)
                    | (~Q(status='approved') & Q(qr_url__isnull=True))
                ),
                name='gatepass_qr_url_iff_approved',
            ),
            models.CheckConstraint(
                condition=Q(hod__isnull=True) | Q(status__in=['approved', 'rejected']),
                name='gatepass_hod_only_when_decided',
            ),
        ]

    def __str__(self):
        return f"GatePass {self.pk} for {self.student_id} ({self.status})"
