"""
Données de test partagées par les suites paiements, commandes et livraison
"""
from decimal import Decimal

from django.contrib.auth.models import User

from accounts.models import BankAccount
from orders.models import Order
from orders.utils import generate_reference
from products.models import Product


def make_user(username, email=None, **extra):
    if email is None:
        email = f"{username}@example.com"
    return User.objects.create_user(username=username, email=email, password='pass1234', **extra)


def make_product(seller=None, price='10.00', product_type=Product.DIGITAL, title='My Ebook', **extra):
    owner_type = Product.SELLER if seller else Product.PLATFORM
    return Product.objects.create(
        owner_type=owner_type,
        seller=seller,
        title=title,
        price=Decimal(price),
        product_type=product_type,
        **extra
    )


def make_order(product, buyer=None, status=Order.PENDING, exchange_rate='1', **extra):
    rate = Decimal('0') if product.is_platform_owned else Decimal('0.25')
    commission = (product.price * rate).quantize(Decimal('0.01'))
    fields = {
        'product': product,
        'buyer': buyer,
        'amount': product.price,
        'currency': 'NGN',
        'exchange_rate': Decimal(exchange_rate),
        'gateway_amount': int(product.price * Decimal(exchange_rate) * 100),
        'payment_method': 'card',
        'gateway_reference': generate_reference(),
        'commission_rate': rate,
        'commission_amount': commission,
        'seller_amount': product.price - commission,
        'status': status,
    }
    fields.update(extra)
    return Order.objects.create(**fields)


def add_bank_account(user, **extra):
    fields = {
        'bank_name': 'Access Bank',
        'bank_code': '044',
        'account_number': '0123456789',
        'account_name': 'ADA SELLER',
    }
    fields.update(extra)
    return BankAccount.objects.create(vendor_profile=user.profile, **fields)
