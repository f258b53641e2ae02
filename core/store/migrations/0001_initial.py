from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StoreRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "namespace",
                    models.CharField(
                        help_text="Logical collection, e.g. 'medicines' or 'restock_requests'.",
                        max_length=128,
                    ),
                ),
                (
                    "key",
                    models.CharField(
                        help_text="Owner identity or record id inside the namespace.",
                        max_length=255,
                    ),
                ),
                (
                    "record",
                    models.JSONField(
                        help_text="Full record document. Overwritten as a whole on every put.",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "medrestock_store_records",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["namespace"], name="idx_store_namespace"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("namespace", "key"),
                        name="uq_store_namespace_key",
                    ),
                ],
            },
        ),
    ]
