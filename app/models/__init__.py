# app/models/__init__.py
from app.models.user_models import User, RefreshToken
from app.models.activity_models import UserActivity
from app.models.inventory_models import Product
from app.models.billing_models.voucher_models import Voucher, DiscountType
from app.models.billing_models.order_models import Order, OrderItem, OrderStatus, PaymentMethod
from app.models.billing_models.cart_models import CartItem
from app.models.billing_models.expense_models import Expense
from app.models.booking_models.service_models import Service
from app.models.booking_models.barber_models import Barber, BarberStatus
from app.models.booking_models.appointment_models import Appointment, AppointmentStatus
from app.models.booking_models.queue_models import QueueEntry, QueueStatus
