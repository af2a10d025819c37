import attrs

from tourbus.platform.exception.exceptions import DomainError


@attrs.frozen
class CustomerInfo:
    name: str
    email: str
    phone: str

    def validate(self) -> None:
        if not self.name.strip():
            raise DomainError('Customer name is required')
        if '@' not in self.email or not self.email.strip():
            raise DomainError('A valid customer email is required')
        if not self.phone.strip():
            raise DomainError('Customer phone is required')
