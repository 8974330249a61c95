from storefront.models.product import Product
from storefront.models.cart import Cart, LineItem
from storefront.models.order import Order, OrderItem, PayType
from storefront.models.user import User
