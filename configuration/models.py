from django.db import models


class PlatformConfig(models.Model):
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=500)
    description = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']
        verbose_name = 'Platform Config Entry'
        verbose_name_plural = 'Platform Config'

    def __str__(self):
        return f"{self.key}={self.value}"
