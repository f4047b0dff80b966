"""
Transaction Model - one product sale from the seed feed

Feed Field Mapping:
  Feed key       → DB Column       Notes
  ─────────────────────────────────────────────────────────────
  id             → id              External id, primary key (unique)
  title          → title
  price          → price           Assumed non-negative, not validated
  description    → description
  category       → category        Indexed for pie-chart grouping
  image          → image           URL
  sold           → sold
  dateOfSale     → date_of_sale    Naive UTC, indexed for month windows
"""
from models.database import db
from sqlalchemy import and_


class Transaction(db.Model):
    __tablename__ = 'transactions'

    # === Primary Key (external id from the feed) ===
    id = db.Column(db.Integer, primary_key=True, autoincrement=False)

    title = db.Column(db.Text)
    price = db.Column(db.Float, nullable=False, default=0.0)
    description = db.Column(db.Text)
    category = db.Column(db.String(100), index=True)
    image = db.Column(db.Text)
    sold = db.Column(db.Boolean, default=False)
    date_of_sale = db.Column(db.DateTime, index=True, nullable=False)

    @classmethod
    def window_filter(cls, window):
        """
        Return the filter condition for a half-open month window.

        Use this when building filter lists for month-scoped queries:
            query = db.session.query(Transaction).filter(Transaction.window_filter(window))
        """
        return and_(
            cls.date_of_sale >= window.start,
            cls.date_of_sale < window.end,
        )

    def to_dict(self):
        """Convert to dictionary keyed the way the feed and the API name fields."""
        return {
            'id': self.id,
            'title': self.title,
            'price': self.price,
            'description': self.description,
            'category': self.category,
            'image': self.image,
            'sold': self.sold,
            'dateOfSale': self.date_of_sale,
        }

    def __repr__(self):
        return f"<Transaction {self.id} {self.title!r} ${self.price}>"
