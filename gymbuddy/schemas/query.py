from marshmallow import EXCLUDE, fields, validate

from gymbuddy.extensions import ma


class SuggestionQuerySchema(ma.Schema):
    """Query string of GET /api/matches/suggestions."""

    class Meta:
        unknown = EXCLUDE

    distance = fields.Float(validate=validate.Range(min=0, min_inclusive=False))
    limit = fields.Integer(validate=validate.Range(min=1))
    min_score = fields.Integer(validate=validate.Range(min=0, max=100))
    type = fields.String(load_default="user", validate=validate.OneOf(("user", "instructor")))


class NearbyQuerySchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    distance = fields.Float(validate=validate.Range(min=0, min_inclusive=False))
    limit = fields.Integer(load_default=20, validate=validate.Range(min=1, max=100))
