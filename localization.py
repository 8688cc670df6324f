class Translator:
    def __init__(self, language: str = "en") -> None:
        self.language = language
        self.translations = {
            "en": {},
            "ru": {
                "First Workout": "Первая тренировка",
                "Log your first workout": "Создайте свою первую тренировку",
                "Getting Started": "Начало пути",
                "Complete 5 workouts": "Проведите 5 тренировок",
                "Regularity": "Регулярность",
                "Complete 10 workouts": "Проведите 10 тренировок",
                "Warming Up": "На разогреве",
                "Complete 20 workouts": "Проведите 20 тренировок",
                "Half a Hundred": "Полсотни",
                "Complete 50 workouts": "Проведите 50 тренировок",
                "Hundred Workouts": "Сотня тренировок",
                "Complete 100 workouts": "Проведите 100 тренировок",
                "Hundred Sets": "Сотня подходов",
                "Perform 100 sets": "Выполните 100 подходов",
                "Five Hundred": "Полтысячи",
                "Perform 500 sets": "Выполните 500 подходов",
                "Thousand Sets": "Тысячник",
                "Perform 1000 sets": "Выполните 1000 подходов",
                "2000 Sets": "2000 подходов",
                "Reach 2000 sets in total": "Наберите 2000 подходов за всё время",
                "5000 Sets": "5000 подходов",
                "Reach 5000 sets in total": "Наберите 5000 подходов за всё время",
                "10,000 Reps": "10 000 повторений",
                "Perform 10,000 reps in total": "Выполните суммарно 10 000 повторений",
                "Week Streak": "Неделя подряд",
                "Train 7 days in a row": "Тренируйтесь 7 дней подряд",
                "Two Week Streak": "Две недели подряд",
                "Train 14 days in a row": "Тренируйтесь 14 дней подряд",
                "Month Streak": "Месяц подряд",
                "Train 30 days in a row": "Тренируйтесь 30 дней подряд",
                "Heavy Lifter": "Тяжеловес",
                "Lift 1000 kg in total": "Поднимите 1000 кг суммарно",
                "Iron 5000": "Железо 5000",
                "Lift 5000 kg in total": "Наберите 5000 кг суммарно",
                "Iron 10,000": "Железо 10 000",
                "Lift 10,000 kg in total": "Наберите 10 000 кг суммарно",
                "Three a Week": "Три за неделю",
                "Complete 3 workouts in the last 7 days": "Выполните 3 тренировки за последние 7 дней",
                "12 a Month": "12 в месяц",
                "Complete 12 workouts this month": "Выполните 12 тренировок в текущем месяце",
                "Double Session": "Двойная сессия",
                "Complete 2 workouts in one day": "Сделайте 2 тренировки за один день",
            },
        }

    def gettext(self, key: str) -> str:
        return self.translations.get(self.language, {}).get(key, key)
