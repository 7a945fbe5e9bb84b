from flask_wtf import FlaskForm
from wtforms import BooleanField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional, URL

DIFFICULTIES = ['Easy', 'Medium', 'Hard']

class ProblemForm(FlaskForm):
    """Form for adding a problem by hand."""
    name = StringField('Name', validators=[DataRequired(), Length(max=255)])
    description = TextAreaField('Description', validators=[Optional()])
    platform = StringField('Platform', validators=[Optional(), Length(max=32)])
    topic = StringField('Topic', validators=[Optional(), Length(max=64)])
    language = StringField('Language', validators=[Optional(), Length(max=64)])
    difficulty = SelectField('Difficulty', choices=[('', '')] + [(d, d) for d in DIFFICULTIES], default='',
                             validators=[Optional()])
    url = StringField('URL', validators=[Optional(), URL(), Length(max=512)])
    # JSON bodies carry real booleans
    completed = BooleanField('Completed', false_values=(False, 'false', ''))

class ProblemUpdateForm(ProblemForm):
    """Partial update: every field is optional."""
    name = StringField('Name', validators=[Optional(), Length(max=255)])
