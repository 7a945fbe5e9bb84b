from flask_wtf import FlaskForm
from wtforms import SelectField, StringField
from wtforms.validators import DataRequired, Length, Regexp

from codevance.platforms import platform_names

class LinkAccountForm(FlaskForm):
    """Form for linking a coding platform account."""
    platform = SelectField('Platform', choices=[(name, name) for name in platform_names()],
                           validators=[DataRequired()])
    username = StringField('Username', filters=[lambda value: value.strip() if value else value], validators=[
        DataRequired(),
        Length(max=128),
        Regexp(r'^[^\s/?#]+$', message='Username must not contain spaces or URL characters')
    ])
