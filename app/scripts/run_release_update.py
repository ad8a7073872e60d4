"""
発売状況更新バッチ実行スクリプト

使い方:
    python -m app.scripts.run_release_update

cronで定期実行する場合（スケジューラーを使わない構成）:
    0 3 * * * cd /path/to/project && python -m app.scripts.run_release_update >> /var/log/release_update.log 2>&1
"""
import sys
from datetime import datetime

from dotenv import load_dotenv
load_dotenv()

from app.services.release_batch import run_release_update_batch


def main():
    """メイン処理"""
    print("=" * 60)
    print("🚀 発売状況更新バッチ処理")
    print(f"   実行日時: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    try:
        result = run_release_update_batch()

        print("\n📊 実行結果:")
        print(f"   ステータス: {result['status']}")
        print(f"   処理件数: {result['total']}")
        print(f"   発売済み更新: {result['released']}")
        print(f"   通知作成: {result['notifications']}件")
        print(f"   エラー: {result['errors']}")

        if 'duration_seconds' in result:
            print(f"   処理時間: {result['duration_seconds']:.2f}秒")

        if result.get('figures'):
            print("\n📦 発売済みにしたフィギュア:")
            for figure in result['figures']:
                print(f"   - {figure['figure_name'][:40]} ({figure['release_date']}) 通知 {figure['notified']}件")

        print("\n✅ バッチ処理が完了しました")
        return 0

    except Exception as e:
        print(f"\n❌ エラーが発生しました: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
