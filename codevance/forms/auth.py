from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, EmailField
from wtforms.validators import DataRequired, Email, Length, Optional, ValidationError, Regexp
import re
from codevance.models.user_repository import SqlAlchemyUserRepository
from codevance.extensions import db

user_repository = SqlAlchemyUserRepository(db)

class LoginForm(FlaskForm):
    """Form for user login."""
    email = EmailField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember_me = BooleanField('Remember Me')

class RegistrationForm(FlaskForm):
    """Form for user registration."""
    username = StringField('Username', validators=[
        DataRequired(),
        Length(min=3, max=64, message='Username must be between 3 and 64 characters'),
        Regexp(r'^[A-Za-z0-9_.-]+$', message="Username must contain only letters, numbers, dots, dashes and underscores.")
    ])
    email = EmailField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    password = PasswordField('Password', validators=[
        DataRequired(),
        Length(min=8, message='Password must be at least 8 characters')
    ])
    full_name = StringField('Full Name', validators=[Optional(), Length(max=128)])

    def validate_password(self, field):
        """Validate password complexity."""
        password = field.data

        if not re.search(r'[A-Z]', password):
            raise ValidationError('Password must include at least one uppercase letter')

        if not re.search(r'[a-z]', password):
            raise ValidationError('Password must include at least one lowercase letter')

        if not re.search(r'[0-9]', password):
            raise ValidationError('Password must include at least one number')

    def validate_username(self, username):
        user = user_repository.get_by_username(username.data)
        if user is not None:
            raise ValidationError('Please use a different username.')

    def validate_email(self, email):
        user = user_repository.get_by_email(email.data)
        if user is not None:
            raise ValidationError('Please use a different email address.')
