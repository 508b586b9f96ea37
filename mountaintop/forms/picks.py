from flask_wtf import FlaskForm
from wtforms import IntegerField, SelectField
from wtforms.validators import DataRequired, NumberRange, Optional

from mountaintop.models.pick import OVER_UNDER_CHOICES


class PickForm(FlaskForm):
    """Pick submission; accepts form data or a JSON body"""

    league_id = IntegerField("League", validators=[DataRequired()])
    game_id = IntegerField("Game", validators=[DataRequired()])
    picked_team_id = IntegerField("Team", validators=[DataRequired()])
    picked_over_under = SelectField(
        "Over/Under",
        choices=[(choice, choice.title()) for choice in OVER_UNDER_CHOICES],
        validators=[DataRequired()],
    )
    confidence = IntegerField(
        "Confidence", validators=[Optional(), NumberRange(min=0)]
    )
