"""
Persistence for users, tasks, categories and options.

Every repository takes the SQLAlchemy session it works with, so tests can hand
in their own. Reads of user-owned rows are always filtered by the owner's id:
a row that exists but belongs to someone else is returned as ``None``, exactly
like a row that does not exist.
"""
from sqlalchemy.exc import IntegrityError

from models import INT64_MAX, INT64_MIN, Category, Option, Task, User, db, utcnow


class Repository:
    model = None

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def _insert(self, entity):
        now = utcnow()
        if hasattr(entity, "updated_at"):
            entity.created_at = now
            entity.updated_at = now
        self.session.add(entity)
        self.session.commit()
        return entity

    def _update(self, entity, fields):
        for name, value in fields.items():
            setattr(entity, name, value)
        if hasattr(entity, "updated_at"):
            entity.updated_at = utcnow()
        self.session.commit()
        return entity

    def delete(self, entity):
        self.session.delete(entity)
        self.session.commit()

    def get_owned(self, user_id, entity_id):
        # an id the column cannot hold matches no row
        if not INT64_MIN <= entity_id <= INT64_MAX:
            return None
        return self.session.query(self.model).filter_by(id=entity_id, user_id=user_id).first()


class UserRepository(Repository):
    model = User

    def get(self, user_id):
        return self.session.get(User, user_id)

    def find_by_email(self, email):
        return self.session.query(User).filter(User.email == email).first()

    def create(self, first_name, last_name, email, password_hash, is_student=False):
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password_hash,
            is_student=is_student,
        )
        return self._insert(user)

    def update(self, user, fields):
        return self._update(user, fields)


class CategoryRepository(Repository):
    model = Category

    def list_for_user(self, user_id):
        return (
            self.session.query(Category)
            .filter_by(user_id=user_id)
            .order_by(Category.name.asc(), Category.id.asc())
            .all()
        )

    def create(self, user_id, name, color=None):
        return self._insert(Category(user_id=user_id, name=name, color=color))

    def update(self, category, fields):
        return self._update(category, fields)


class TaskRepository(Repository):
    model = Task

    def list_for_user(self, user_id):
        return (
            self.session.query(Task)
            .filter_by(user_id=user_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .all()
        )

    def create(self, user_id, fields):
        return self._insert(Task(user_id=user_id, **fields))

    def update(self, task, fields):
        return self._update(task, fields)


class OptionRepository(Repository):
    model = Option

    DEFAULTS = {
        "language": "SK",
        "theme": "light",
        "task_filter": "all",
        "task_sort": "none",
    }

    def find_for_user(self, user_id):
        return self.session.query(Option).filter_by(user_id=user_id).first()

    def get_or_create(self, user_id):
        option = self.find_for_user(user_id)
        if option is not None:
            return option

        try:
            return self._insert(Option(user_id=user_id, **self.DEFAULTS))
        except IntegrityError:
            # another request created the row first; user_id is unique
            self.session.rollback()
            return self.find_for_user(user_id)

    def update(self, option, fields):
        return self._update(option, fields)
