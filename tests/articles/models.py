"""
Test models: articles as resources, teams as non-user principals.
"""

from __future__ import annotations

from django.db import models


class Article(models.Model):
    title = models.CharField(max_length=255)

    class Meta:
        app_label = "articles"

    def __str__(self) -> str:
        return self.title


class Team(models.Model):
    name = models.CharField(max_length=100)

    class Meta:
        app_label = "articles"

    def __str__(self) -> str:
        return self.name
