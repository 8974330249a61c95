from storefront.db.base_class import Base


# IMPORT ALL MODELS HERE (THIS REGISTERS THEM WITH Base.metadata)
from storefront.models.product import Product
from storefront.models.cart import Cart, LineItem
from storefront.models.order import Order, OrderItem
from storefront.models.user import User
