from django.db import models


class Province(models.Model):
    name = models.CharField("Name", max_length=100, unique=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Province"
        verbose_name_plural = "Provinces"

    def __str__(self):
        return self.name


class City(models.Model):
    province = models.ForeignKey(Province, on_delete=models.CASCADE, related_name="cities")
    name = models.CharField("Name", max_length=100)

    class Meta:
        ordering = ["name"]
        verbose_name = "City"
        verbose_name_plural = "Cities"
        constraints = [
            models.UniqueConstraint(fields=["province", "name"], name="unique_city_per_province"),
        ]

    def __str__(self):
        return self.name


class Town(models.Model):
    city = models.ForeignKey(City, on_delete=models.CASCADE, related_name="towns")
    name = models.CharField("Name", max_length=100)

    class Meta:
        ordering = ["name"]
        verbose_name = "Town"
        verbose_name_plural = "Towns"
        constraints = [
            models.UniqueConstraint(fields=["city", "name"], name="unique_town_per_city"),
        ]

    def __str__(self):
        return self.name
