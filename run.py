from mountaintop import create_app, db
from mountaintop.models import Game, League, LeagueMembership, Pick, Season, Team, User, Week

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "User": User,
        "League": League,
        "LeagueMembership": LeagueMembership,
        "Season": Season,
        "Week": Week,
        "Game": Game,
        "Pick": Pick,
        "Team": Team,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
