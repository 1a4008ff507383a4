"""Report filters.

Every filter that is present adds one predicate, ANDed onto the rest;
an absent filter adds nothing.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Optional

from django.db.models import Q
from rest_framework import serializers

from apps.crm.models import Customer
from apps.sales.models import Sale


@dataclass(frozen=True)
class Clause:
    """One filter predicate: `lookup=value` when the filter is present."""

    name: str
    lookup: str

    def to_q(self, value) -> Q:
        return Q(**{self.lookup: value})


CLAUSES = (
    Clause("start_date", "created_at__date__gte"),
    Clause("end_date", "created_at__date__lte"),
    Clause("region", "customer__province__name__iexact"),
    Clause("sales_channel", "sales_channel"),
    Clause("customer_type", "customer__customer_type"),
)


@dataclass(frozen=True)
class ReportFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    region: Optional[str] = None
    sales_channel: Optional[str] = None
    customer_type: Optional[str] = None

    @classmethod
    def from_query(cls, params) -> "ReportFilters":
        """Validate query parameters; raises ValidationError on bad input."""
        serializer = ReportFilterSerializer(data={key: params.get(key) for key in params.keys()})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return cls(**{f.name: data.get(f.name) or None for f in fields(cls)})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) in (None, "") for f in fields(self))

    def as_q(self) -> Q:
        query = Q()
        for clause in CLAUSES:
            value = getattr(self, clause.name)
            if value not in (None, ""):
                query &= clause.to_q(value)
        return query


class ReportFilterSerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    region = serializers.CharField(required=False, allow_blank=True, trim_whitespace=True)
    sales_channel = serializers.ChoiceField(choices=Sale.CHANNEL_CHOICES, required=False, allow_blank=True)
    customer_type = serializers.ChoiceField(choices=Customer.TYPE_CHOICES, required=False, allow_blank=True)

    def to_internal_value(self, data):
        # Empty query values mean "no filter".
        data = {key: value for key, value in data.items() if value not in (None, "")}
        return super().to_internal_value(data)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": ["End date must not be before start date"]})
        return attrs
