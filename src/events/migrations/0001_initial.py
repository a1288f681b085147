import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", models.CharField(db_index=True, max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("location", models.CharField(blank=True, max_length=255, null=True)),
                ("start", models.DateTimeField(db_index=True)),
                ("end", models.DateTimeField(blank=True, db_index=True, null=True)),
                (
                    "max_participants",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Leave empty for unlimited capacity.",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "registration_form",
                    models.JSONField(
                        blank=True,
                        help_text="Form definition presented to participants when they register.",
                        null=True,
                    ),
                ),
                (
                    "feedback_form",
                    models.JSONField(
                        blank=True,
                        help_text="Form definition for post-event feedback. Feedback is disabled when empty.",
                        null=True,
                    ),
                ),
                (
                    "feedback_deadline",
                    models.DateTimeField(
                        blank=True,
                        help_text="Feedback can be submitted or edited until this moment. Empty means no limit.",
                        null=True,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["start"],
            },
        ),
        migrations.CreateModel(
            name="EventRegistration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("cancelled", "Cancelled")],
                        db_index=True,
                        default="active",
                        max_length=20,
                    ),
                ),
                ("registered_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "answers",
                    models.JSONField(blank=True, help_text="Answers to the event's registration form.", null=True),
                ),
                (
                    "attendance_status",
                    models.CharField(
                        choices=[
                            ("unvalidated", "Not yet validated"),
                            ("present", "Present"),
                            ("absent", "Absent"),
                            ("excused", "Excused"),
                        ],
                        db_index=True,
                        default="unvalidated",
                        max_length=20,
                    ),
                ),
                ("attendance_validated_at", models.DateTimeField(blank=True, null=True)),
                (
                    "attendance_validated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="validated_registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["registered_at"],
                "indexes": [models.Index(fields=["event", "status"], name="idx_registration_event_status")],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user"), name="unique_event_registration_user")
                ],
            },
        ),
        migrations.CreateModel(
            name="EventFeedback",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("answers", models.JSONField(help_text="Answers to the event's feedback form.")),
                ("submitted_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("edited_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedbacks",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_feedbacks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["submitted_at"],
                "constraints": [models.UniqueConstraint(fields=("event", "user"), name="unique_event_feedback_user")],
            },
        ),
    ]
