def get_new_order_notification_message(order_record):
    return f"""
        Your order has been placed! \n
        Order ID: {order_record.get('id_')}\n
        Restaurant ID: {order_record.get('restaurant_id')}\n
        Subtotal: {order_record.get('subtotal')}\n
        Tax: {order_record.get('tax_amount')}\n
        Delivery fee: {order_record.get('delivery_fee')}\n
        Total: {order_record.get('total_amount')}\n
        Address: {order_record.get('delivery_address')}\n
        Notes: {order_record.get('notes')}
    """


def get_order_status_changed_message(order_record, previous_status):
    message = f"""
        Order {order_record.get('id_')} status changed: {previous_status} -> {order_record.get('status')}\n
    """
    if order_record.get('estimated_delivery_time'):
        message += f"        Estimated delivery time: {order_record.get('estimated_delivery_time')}\n"
    return message
