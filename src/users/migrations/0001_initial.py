from django.db import migrations, models

import users.managers


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("openid", models.CharField(max_length=64, unique=True)),
                ("username", models.CharField(max_length=150)),
                ("avatar", models.URLField(blank=True, max_length=500)),
                (
                    "permission",
                    models.PositiveSmallIntegerField(choices=[(0, "None"), (1, "Admin")], default=0),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["id"],
            },
            managers=[
                ("objects", users.managers.UserManager()),
            ],
        ),
    ]
