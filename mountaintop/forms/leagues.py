from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Regexp


class JoinLeagueForm(FlaskForm):
    code = StringField(
        "League Code",
        validators=[
            DataRequired(message="League code is required"),
            Regexp(
                r"^\s*[A-Za-z0-9]{4}-[A-Za-z0-9]{4}\s*$",
                message="League codes look like ABCD-1234",
            ),
        ],
    )
