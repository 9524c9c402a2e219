from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key, Attr
from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import MIN_RATING, MAX_RATING
from chalicelib.constants.status_codes import http200
from chalicelib.constants.substitute_keys import to_db
from chalicelib.orders import Order
from chalicelib.restaurants import Restaurant
from chalicelib.utils import auth as utils_auth, app as utils_app, data as utils_data, db as utils_db, exceptions
from chalicelib.utils.logger import logger


class Review(EntityBase):
    pk = keys_structure.reviews_pk
    sk = keys_structure.reviews_sk

    not_found_message = 'Review not found'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'user_id': lambda x: isinstance(x, str),
        'restaurant_id': lambda x: isinstance(x, str),
        'rating': lambda x: utils_data.is_int(x) and MIN_RATING <= x <= MAX_RATING,
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'is_approved': lambda x: isinstance(x, bool),
        'date_updated': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'order_id': lambda x: isinstance(x, str),
        'comment_': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.user_id: str = kwargs.get('user_id')
        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.order_id: str = kwargs.get('order_id')
        self.rating: int = utils_data.to_int(kwargs.get('rating'), kwargs.get('rating'))
        self.comment_: str = kwargs.get('comment_')
        self.is_approved: bool = kwargs.get('is_approved', False)
        self.record_type = 'review'

    @classmethod
    def init_by_id(cls, review_id):
        c = cls(review_id)
        c._fill_from_db()
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        request_body = utils_data.parse_raw_body(request)
        utils_data.substitute_keys(request_body, to_db)
        if not request_body.get('restaurant_id') or request_body.get('rating') is None:
            raise exceptions.MandatoryFieldsAreNotFilled('restaurant_id and rating must be provided')
        return cls(
            id_=str(uuid4()),
            user_id=request.auth_result['user_id'],
            restaurant_id=request_body['restaurant_id'],
            order_id=request_body.get('order_id'),
            rating=request_body['rating'],
            comment_=request_body.get('comment_'),
            is_approved=False
        )

    @classmethod
    @utils_auth.authenticate_class
    def init_request_moderate(cls, request, review_id):
        logger.info("init_request_moderate ::: started")
        if not utils_auth.is_admin(request.auth_result):
            raise exceptions.AccessDenied('Only admins can moderate reviews')
        c = cls.init_by_id(review_id)
        c.request_data = utils_data.parse_raw_body(request)
        return c

    @classmethod
    @utils_auth.authenticate_class
    def init_request_delete(cls, request, review_id):
        logger.info("init_request_delete ::: started")
        c = cls.init_by_id(review_id)
        utils_auth.check_owner_or_admin(request.auth_result, c.user_id, 'Only the author can delete the review')
        return c

    @utils_app.log_start_finish
    def endpoint_create(self) -> Response:
        Restaurant.init_by_id(self.restaurant_id)
        if self.order_id:
            order = Order.init_by_id(self.order_id)
            if order.user_id != self.user_id or order.restaurant_id != self.restaurant_id:
                raise exceptions.ValidationException('Review order must be your order from this restaurant')
        self._create_db_record()
        return Response(status_code=http200, body={'message': 'Review was submitted for moderation',
                                                   'id': self.id_})

    @utils_app.log_start_finish
    def endpoint_moderate(self) -> Response:
        is_approved = self.request_data.get('is_approved')
        if not isinstance(is_approved, bool):
            raise exceptions.ValidationException('is_approved must be a boolean')
        self.is_approved = is_approved
        self._update_db_record()
        recalculate_restaurant_rating(self.restaurant_id)
        return Response(status_code=http200, body=self._to_ui())

    @utils_app.log_start_finish
    def endpoint_delete(self) -> Response:
        self._delete_db_record()
        if self.is_approved:
            recalculate_restaurant_rating(self.restaurant_id)
        return Response(status_code=http200, body={'message': 'Review was successfully deleted', 'id': self.id_})

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(review_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'restaurant_id': self.restaurant_id,
            'order_id': self.order_id,
            'rating': self.rating,
            'comment_': self.comment_,
            'is_approved': self.is_approved,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_reviews(filter_expression=None) -> List[Review]:
    records = utils_db.query_items_paged(Key('partkey').eq(Review.pk), filter_expression=filter_expression)
    reviews = [Review.init_by_db_record(record) for record in records]
    return sorted(reviews, key=lambda review: review.date_created, reverse=True)


def get_pending_reviews() -> List[Review]:
    return get_reviews(Attr('is_approved').eq(False))


def recalculate_restaurant_rating(restaurant_id):
    approved = get_reviews(Attr('restaurant_id').eq(restaurant_id) & Attr('is_approved').eq(True))
    try:
        restaurant = Restaurant.init_by_id(restaurant_id)
    except exceptions.RecordNotFound:
        logger.warning(f'recalculate_restaurant_rating ::: restaurant {restaurant_id} not found, skipping')
        return
    restaurant.update_rating([review.rating for review in approved])


@utils_app.log_start_finish
def endpoint_get_restaurant_reviews(restaurant_id) -> Response:
    Restaurant.init_by_id(restaurant_id)
    reviews = get_reviews(Attr('restaurant_id').eq(restaurant_id) & Attr('is_approved').eq(True))
    return Response(status_code=http200, body=[review.to_ui() for review in reviews])


@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_user_reviews(request) -> Response:
    reviews = get_reviews(Attr('user_id').eq(request.auth_result['user_id']))
    return Response(status_code=http200, body=[review.to_ui() for review in reviews])
