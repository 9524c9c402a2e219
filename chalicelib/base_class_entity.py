from typing import Tuple, Dict, List, Any

from chalicelib.constants.substitute_keys import from_db
from chalicelib.utils import db as utils_db, exceptions
from chalicelib.utils.data import substitute_keys, now_iso
from chalicelib.utils.logger import logger


class EntityBase:
    pk = None
    sk = None

    not_found_message = 'Record not found'
    # create fails instead of overwriting an existing record with the same key
    create_only_new = False

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, id_, **kwargs):
        self.id_: str = id_
        self.record_type: str = ''
        self.db_record: Dict = {}
        self.request_data: Any[Dict, None] = kwargs.get('request_data')
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or self.date_created

    @classmethod
    def init_by_db_record(cls, record: Dict):
        return cls(**record)

    def _get_pk_sk(self) -> Tuple[str, str]:
        """
        Should be re-implemented in each child class
        :return:
        partkey, sortkey of db item for child
        """
        return self.pk, self.sk

    def _get_db_item(self) -> Dict:
        try:
            return utils_db.get_db_item(*self._get_pk_sk())
        except exceptions.RecordNotFound:
            raise exceptions.RecordNotFound(self.not_found_message)

    def _fill_from_db(self):
        """
        Re-initializes the entity with the attributes of its db record
        """
        self.__init__(**self._get_db_item())

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        pk, sk = self._get_pk_sk()
        self.db_record = {
            'partkey': pk,
            'sortkey': sk,
            'record_type': self.record_type,
            **self._to_dict()
        }

    def raise_validation_error(self, key):
        message = f'Validation error occurred while validating the field={key}'
        logger.error(f"raise_validation_error ::: {self.record_type=} {message}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self, record: Dict):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(record.get(key)) is False:
                self.raise_validation_error(key)

    def _validate_optional_fields(self, record: Dict):
        """
        Validates optional fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        """
        for key, validator_func in self.optional_fields_validation.items():
            if record.get(key) is not None and validator_func(record.get(key)) is False:
                self.raise_validation_error(key)

    def _create_db_record(self) -> None:
        """
        Creates entity db record
        """
        self._init_db_record()
        self._validate_mandatory_fields(self.db_record)
        self._validate_optional_fields(self.db_record)
        utils_db.put_db_record(self.db_record, only_new=self.create_only_new)
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} {self.db_record.get('partkey')=} "
                    f"{self.db_record.get('sortkey')=} successfully created")

    def _update_fields_whitelist(self) -> List:
        return [*self.required_mutable_fields_validation.keys(), *self.optional_fields_validation.keys()]

    def _apply_update_body(self, update_body: Dict) -> None:
        """
        Copies whitelisted fields of a request body onto the entity, everything else is ignored
        """
        for key in self._update_fields_whitelist():
            if key in update_body:
                setattr(self, key, update_body[key])
            else:
                logger.debug(f'_apply_update_body ::: {key=} is not in the update body')
        ignored = set(update_body.keys()) - set(self._update_fields_whitelist())
        if ignored:
            logger.warning(f'_apply_update_body ::: fields {sorted(ignored)} could not be updated, ignoring..')

    def _update_db_record(self):
        """
        Updates entity db record with the current values of whitelisted fields
        """
        pk, sk = self._get_pk_sk()
        self.date_updated = now_iso()
        record = self._to_dict()
        self._validate_mandatory_fields(record)
        self._validate_optional_fields(record)
        whitelist = self._update_fields_whitelist()
        update_dict = {key: value for key, value in record.items() if key in whitelist}
        utils_db.update_db_record(
            key={'partkey': pk, 'sortkey': sk},
            update_body=update_dict,
            allowed_attrs_to_update=whitelist,
            allowed_attrs_to_delete=list(self.optional_fields_validation.keys())
        )
        logger.info(f"_update_db_record ::: {self.record_type=} "
                    f"{self.id_=} {pk=} {sk=} successfully updated")

    def _delete_db_record(self):
        pk, sk = self._get_pk_sk()
        utils_db.delete_db_record({'partkey': pk, 'sortkey': sk})
        logger.info(f"_delete_db_record ::: {self.record_type=} {self.id_=} successfully deleted")

    def _to_ui(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item

    def to_ui(self) -> Dict:
        return self._to_ui()
