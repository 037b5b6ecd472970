from configs import db
from datetime import datetime
from db.models.common import new_id


class Location(db.Model):
    __tablename__ = "location"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
