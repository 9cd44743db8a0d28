from django.db import models


class Country(models.Model):
    name = models.CharField(max_length=200)
    # name_key: casefolded name; every lookup by name goes through it
    name_key = models.CharField(max_length=200, unique=True, editable=False)
    capital = models.CharField(max_length=200, null=True, blank=True)
    region = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    population = models.PositiveBigIntegerField(default=0)
    # currency_code / exchange_rate: null when upstream has no usable value
    currency_code = models.CharField(max_length=10, null=True, blank=True, db_index=True)
    exchange_rate = models.FloatField(null=True, blank=True)
    # estimated_gdp: 0 whenever no exchange rate could be resolved
    estimated_gdp = models.FloatField(default=0, db_index=True)
    flag_url = models.URLField(max_length=500, null=True, blank=True)
    last_refreshed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["id"]
        verbose_name_plural = "countries"

    @staticmethod
    def normalize_name(name):
        return name.strip().casefold()

    def save(self, *args, **kwargs):
        self.name_key = self.normalize_name(self.name)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class RefreshMetadata(models.Model):
    """One row per completed refresh pass."""
    refreshed_at = models.DateTimeField()

    class Meta:
        ordering = ["-id"]
        verbose_name_plural = "refresh metadata"

    def __str__(self):
        return f"Refresh at {self.refreshed_at.isoformat()}"
