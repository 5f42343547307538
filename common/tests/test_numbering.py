import pytest
from django.contrib.auth.models import User

from common.errors import ConflictError
from common.numbering import allocate_unique


@pytest.mark.django_db
def test_retries_until_a_free_value():
    User.objects.create(username="taken")
    candidates = iter(["taken", "taken", "free"])

    user = allocate_unique(lambda name: User.objects.create(username=name), lambda: next(candidates))

    assert user.username == "free"


@pytest.mark.django_db
def test_returns_existing_row_on_conflict():
    existing = User.objects.create(username="taken")

    found = allocate_unique(
        lambda name: User.objects.create(username=name),
        lambda: "taken",
        existing=lambda: User.objects.get(username="taken"),
    )

    assert found.pk == existing.pk


@pytest.mark.django_db
def test_gives_up_after_attempts():
    User.objects.create(username="taken")
    calls = []

    def generate():
        calls.append(1)
        return "taken"

    with pytest.raises(ConflictError):
        allocate_unique(lambda name: User.objects.create(username=name), generate, attempts=3)
    assert len(calls) == 3
    assert User.objects.count() == 1
