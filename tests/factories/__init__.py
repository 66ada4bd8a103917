"""Factory classes for test data generation."""

from datetime import timedelta

from django.utils import timezone

import factory
from factory.django import DjangoModelFactory
from faker import Faker

from notifications.enums import (
    DeliveryChannel,
    DeliveryStatus,
    DigestFrequency,
    NotificationCategory,
)
from notifications.services.preference_service import default_preferences

fake = Faker()


class NotificationPreferenceFactory(DjangoModelFactory):
    """Factory for NotificationPreference with the default category map."""

    class Meta:
        model = "notifications.NotificationPreference"
        django_get_or_create = ("user_id",)

    user_id = factory.LazyFunction(lambda: f"user_{fake.uuid4()[:12]}")
    is_enabled = True
    digest_frequency = DigestFrequency.INSTANT.value
    preferences = factory.LazyFunction(default_preferences)
    quiet_hours_enabled = False


class NotificationFactory(DjangoModelFactory):
    """Factory for canonical notifications."""

    class Meta:
        model = "notifications.Notification"

    user_id = factory.LazyFunction(lambda: f"user_{fake.uuid4()[:12]}")
    notification_type = NotificationCategory.GENERAL.value
    title = factory.LazyFunction(lambda: fake.sentence(nb_words=4))
    message = factory.LazyFunction(lambda: fake.text(max_nb_chars=200))
    link = "/dashboard"
    is_read = False
    created_at = factory.LazyFunction(timezone.now)


class NotificationDeliveryFactory(DjangoModelFactory):
    """Factory for per-channel delivery rows."""

    class Meta:
        model = "notifications.NotificationDelivery"

    notification = factory.SubFactory(NotificationFactory)
    channel = DeliveryChannel.EMAIL.value
    status = DeliveryStatus.DIGESTED.value
    created_at = factory.SelfAttribute("notification.created_at")


class DigestWindowFactory(DjangoModelFactory):
    """Factory for digest windows; daily by default."""

    class Meta:
        model = "notifications.DigestWindow"

    user_id = factory.LazyFunction(lambda: f"user_{fake.uuid4()[:12]}")
    frequency = DigestFrequency.DAILY.value
    window_start = factory.LazyFunction(timezone.now)
    window_end = factory.LazyAttribute(lambda o: o.window_start + timedelta(days=1))
