from .leveling import LevelUpEvent, SkillLevelUp, add_character_experience, add_skill_experience

__all__ = ["LevelUpEvent", "SkillLevelUp", "add_character_experience", "add_skill_experience"]
