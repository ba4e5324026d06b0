"""Customer registration: mirror a user record issued by the auth service."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.actor import Role
from ordering.customer.customer import Customer
from ordering.domain import ordering


@ordering.command(part_of="Customer")
class RegisterCustomer:
    """Create the customer record, or refresh its name and email if it already exists."""

    customer_id = Identifier(required=True)
    username = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    role = String(max_length=20)


@ordering.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        repo = current_domain.repository_for(Customer)
        try:
            customer = repo.get(command.customer_id)
        except ObjectNotFoundError:
            customer = Customer.register(
                username=command.username,
                email=command.email,
                role=command.role or Role.CUSTOMER.value,
                customer_id=command.customer_id,
            )
        else:
            customer.refresh_profile(username=command.username, email=command.email)
        repo.add(customer)
        return str(customer.id)


def register_customer(customer_id, username, email, role=None) -> str:
    return current_domain.process(
        RegisterCustomer(customer_id=customer_id, username=username, email=email, role=role),
        asynchronous=False,
    )
