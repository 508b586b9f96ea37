from mountaintop.forms.auth import LoginForm, RegistrationForm
from mountaintop.forms.leagues import JoinLeagueForm
from mountaintop.forms.picks import PickForm

__all__ = ["LoginForm", "RegistrationForm", "JoinLeagueForm", "PickForm"]
