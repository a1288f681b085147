"""Testing utilities shared by the test-suites of every app."""

import secrets
import string
import typing as t

import faker

from accounts.models import RollcallUser


class RollcallUserFactory:
    """Factory for creating RollcallUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> RollcallUser:
        username = kwargs.pop(
            "username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test"
        )
        email = kwargs.pop("email", username + ("@test.com" if "@" not in username else ""))
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return RollcallUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> RollcallUser:
        return self.create_user(**kwargs)
