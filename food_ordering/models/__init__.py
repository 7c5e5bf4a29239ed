from food_ordering.models.user import User
from food_ordering.models.category import Category
from food_ordering.models.menu_item import MenuItem
from food_ordering.models.order import Order
from food_ordering.models.order_item import OrderItem
