users_pk = 'users'
users_sk = '{user_id}'

addresses_pk = 'addresses_{user_id}'
addresses_sk = '{address_id}'

restaurants_pk = 'restaurants'
restaurants_sk = '{restaurant_id}'

menu_categories_pk = 'menu_categories_{restaurant_id}'
menu_categories_sk = '{category_id}'

menu_items_pk = 'menu_items_{restaurant_id}'
menu_items_sk = '{menu_item_id}'

menu_item_options_pk = 'menu_item_options_{menu_item_id}'
menu_item_options_sk = '{option_id}'

cart_items_pk = 'cart_items_{user_id}'
cart_items_sk = '{restaurant_id}_{cart_item_id}'

orders_pk = 'orders'
orders_sk = '{order_id}'

order_items_pk = 'order_items_{order_id}'
order_items_sk = '{order_item_id}'

payments_pk = 'payments'
payments_sk = '{payment_id}'

reviews_pk = 'reviews'
reviews_sk = '{review_id}'
