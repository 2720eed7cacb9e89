import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

from resource_permissions.conf import get_settings
from resource_permissions.constants import (
    IDX_GRANT_PRINCIPAL,
    IDX_GRANT_RESOURCE,
    UQ_PERMISSION_GRANT,
    UQ_ROLE_GRANT,
)
from resource_permissions.grants_store.fields import (
    primary_key_field,
    reference_id_field,
)

conf = get_settings()


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        migrations.swappable_dependency(conf.permission_model),
        migrations.swappable_dependency(conf.role_model),
    ]

    operations = [
        migrations.CreateModel(
            name="ResourceGrant",
            fields=[
                ("id", primary_key_field(conf)),
                ("principal_type", models.CharField(max_length=255)),
                ("principal_id", reference_id_field(conf)),
                ("resource_type", models.CharField(max_length=255)),
                ("resource_id", reference_id_field(conf)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "granted_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "permission",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="resource_grants",
                        to=conf.permission_model,
                    ),
                ),
                (
                    "role",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="resource_grants",
                        to=conf.role_model,
                    ),
                ),
            ],
            options={
                "db_table": conf.table_name,
                "ordering": [
                    "principal_type",
                    "principal_id",
                    "resource_type",
                    "resource_id",
                    "id",
                ],
                "indexes": [
                    models.Index(
                        fields=["principal_type", "principal_id"],
                        name=IDX_GRANT_PRINCIPAL,
                    ),
                    models.Index(
                        fields=["resource_type", "resource_id"],
                        name=IDX_GRANT_RESOURCE,
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=(
                            "principal_type",
                            "principal_id",
                            "resource_type",
                            "resource_id",
                            "permission",
                        ),
                        name=UQ_PERMISSION_GRANT,
                    ),
                    models.UniqueConstraint(
                        fields=(
                            "principal_type",
                            "principal_id",
                            "resource_type",
                            "resource_id",
                            "role",
                        ),
                        name=UQ_ROLE_GRANT,
                    ),
                ],
            },
        ),
    ]
